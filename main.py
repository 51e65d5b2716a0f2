#!/usr/bin/env python3
"""
Txn Viz - zkApp transaction visualizer
Renders the account update tree of an exported transaction as a graph,
saves it to a file, or prints it to the console.
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

def add_transaction_arguments(parser):
    """Add the arguments shared by every transaction command."""
    parser.add_argument(
        'transaction',
        type=str,
        help='Path to the transaction JSON exported by the SDK'
    )
    parser.add_argument(
        '--name',
        type=str,
        default=None,
        help='Graph title and file name (default: transaction file stem)'
    )
    parser.add_argument(
        '--legend',
        type=str,
        default=None,
        help='YAML file mapping base58 keys to labels'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config.yaml (default: project config.yaml)'
    )

def create_parser():
    """Create the main argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog='txn-viz',
        description='zkApp Transaction Visualizer',
        epilog='Use "txn-viz <command> --help" for command-specific help.'
    )
    
    parser.add_argument(
        '--version', 
        action='version', 
        version='txn-viz 1.0.0'
    )
    
    # Create subcommands
    subparsers = parser.add_subparsers(
        dest='command', 
        help='Available commands',
        metavar='<command>'
    )
    
    # show
    show_parser = subparsers.add_parser(
        'show',
        help='Render a transaction and open it in the image viewer'
    )
    add_transaction_arguments(show_parser)
    
    # save
    save_parser = subparsers.add_parser(
        'save',
        help='Render a transaction graph to a file'
    )
    add_transaction_arguments(save_parser)
    save_parser.add_argument(
        'output',
        type=str,
        help='Output image path'
    )
    
    # print
    print_parser = subparsers.add_parser(
        'print',
        help='Print the normalized transaction to the console'
    )
    add_transaction_arguments(print_parser)
    
    # VALIDATE command group
    validate_parser = subparsers.add_parser(
        'validate',
        help='Validation and testing'
    )
    validate_parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config.yaml (default: ./config.yaml)'
    )
    validate_subs = validate_parser.add_subparsers(
        dest='validate_cmd',
        help='Validation operations',
        metavar='<operation>'
    )
    
    # validate environment
    validate_subs.add_parser(
        'environment',
        help='Validate environment setup'
    )
    
    return parser

def main(argv=None):
    """Main entry point for the CLI application."""
    parser = create_parser()
    args = parser.parse_args(argv)
    
    # Route to appropriate command handlers
    try:
        if args.command in ('show', 'save', 'print'):
            from cli.txn_commands import handle_transaction
            return handle_transaction(args)
        elif args.command == 'validate':
            from cli.validate_commands import handle_validate
            return handle_validate(args)
        else:
            # No command provided, show help
            parser.print_help()
            return 0
            
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user")
        return 1
    except Exception as e:
        print(f"❌ Error: {e}")
        return 1

if __name__ == "__main__":
    sys.exit(main())
