"""
Transaction commands for the txn-viz CLI.
Handles show, save and print operations on exported transactions.
"""

import logging
from pathlib import Path

from core.config import load_config, load_legend
from core.transaction import JsonTransaction
from visualization.output import TransactionVisualizer


def handle_transaction(args):
    """Handle the show, save and print commands."""
    config = load_config(args.config)
    setup_logging(config)
    
    txn = JsonTransaction.from_file(args.transaction)
    name = args.name or Path(args.transaction).stem
    legend = load_legend(args.legend) if args.legend else {}
    visualizer = TransactionVisualizer(config)
    
    if args.command == 'show':
        return show_transaction(visualizer, txn, name, legend)
    elif args.command == 'save':
        return save_transaction(visualizer, txn, name, legend, args.output)
    elif args.command == 'print':
        visualizer.print_transaction(txn, name, legend)
        return 0
    else:
        print("❌ No transaction operation specified. Use --help for options.")
        return 1


def show_transaction(visualizer, txn, name, legend):
    """Render a transaction and open it in the image viewer."""
    print(f"🔍 Rendering transaction '{name}'...")
    result = visualizer.show_transaction(txn, name, legend)
    
    if result.ok:
        print("✅ Opened transaction graph")
    else:
        # the image is still on disk when only the viewer failed
        print(f"⚠️  Could not open the image viewer: {result.error or 'unsupported platform'}")
    return 0


def save_transaction(visualizer, txn, name, legend, output):
    """Render a transaction graph to a file."""
    print(f"🔍 Rendering transaction '{name}'...")
    path = visualizer.save_transaction(txn, name, legend, output)
    print(f"💾 Saved transaction graph to {path}")
    return 0


def setup_logging(config):
    """Set up logging from the loaded configuration."""
    logging_config = config.get('logging', {})
    logging.basicConfig(
        level=getattr(logging, str(logging_config.get('level', 'INFO')).upper(), logging.INFO),
        format=logging_config.get('format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )
