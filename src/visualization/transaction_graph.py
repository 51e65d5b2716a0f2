"""
Graph rendering for normalized account update transactions.
"""

import logging
from typing import Dict, Any, Optional
import networkx as nx
from pathlib import Path
import yaml
import sys

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DEFAULT_CONFIG
from normalization.normalizer import NormalizedNode, NormalizedTransaction


def _quote(text: str) -> str:
    # graphviz strings: normalize double quotes away, keep backslashes literal
    return '"' + text.replace('\\', '\\\\').replace('"', "'") + '"'


def node_label(node: NormalizedNode) -> str:
    """
    Build a left-justified multi-line graphviz label from a node's fields.
    
    Args:
        node: Normalized account update
        
    Returns:
        Quoted graphviz label with a \\l break after every line
    """
    content = node.to_dict(include_children=False, include_idx=False)
    lines = []
    for key, value in content.items():
        # one top-level field per line; nested leaf collections stay inline
        flow = None if isinstance(value, (dict, list)) else False
        dump = yaml.safe_dump({key: value}, sort_keys=False, default_flow_style=flow, allow_unicode=True)
        lines.extend(dump.replace('\\', '\\\\').replace('"', "'").splitlines())
    return '"' + '\\l'.join(lines) + '\\l"'


class TransactionGraphRenderer:
    """
    Builds and renders directed graphs of account update trees.
    """
    
    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the renderer.
        
        Args:
            config: Loaded configuration. If None, uses the built-in defaults
        """
        config = config or DEFAULT_CONFIG
        rendering = {**DEFAULT_CONFIG['rendering'], **config.get('rendering', {})}
        
        self.format = rendering['format']
        self.fontname = rendering['fontname']
        self.title_fontsize = str(rendering['title_fontsize'])
        self.title_loc = rendering['title_loc']
        self.logger = logging.getLogger(__name__)
    
    def build_graph(self, txn: NormalizedTransaction) -> nx.DiGraph:
        """
        Create a NetworkX directed graph from a normalized transaction.
        
        Nodes are numbered from 0 in depth-first pre-order; every
        parent/child relationship becomes an edge.
        
        Args:
            txn: Normalized transaction
            
        Returns:
            NetworkX directed graph carrying graphviz attributes
        """
        G = nx.DiGraph(name='G')
        G.graph['graph'] = {
            'label': _quote(txn.name),
            'labelloc': self.title_loc,
            'fontsize': self.title_fontsize,
        }
        
        next_id = 0
        
        def add_nodes(nodes, parent_id):
            nonlocal next_id
            for node in nodes:
                node_id = next_id
                next_id += 1
                G.add_node(node_id, label=node_label(node), fontname=self.fontname)
                if parent_id is not None:
                    G.add_edge(parent_id, node_id)
                add_nodes(node.children, node_id)
        
        add_nodes(txn.account_updates, None)
        
        self.logger.info(f"Created transaction graph with {G.number_of_nodes()} nodes and {G.number_of_edges()} edges")
        return G
    
    def to_dot(self, G: nx.DiGraph) -> str:
        """Return the graphviz source for a graph."""
        return nx.nx_pydot.to_pydot(G).to_string()
    
    def render(self, G: nx.DiGraph, path: str, fmt: Optional[str] = None) -> Path:
        """
        Lay out the graph with graphviz and write it as an image.
        
        Args:
            G: Graph from build_graph
            path: Output file path
            fmt: Image format. If None, uses the configured format
            
        Returns:
            Path of the written image
        """
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        
        dot = nx.nx_pydot.to_pydot(G)
        dot.write(str(output_path), format=fmt or self.format)
        
        self.logger.info(f"Rendered transaction graph to {output_path}")
        return output_path
