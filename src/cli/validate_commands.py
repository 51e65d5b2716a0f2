"""
Validate commands for the txn-viz CLI.
Handles environment validation.
"""

import shutil
import sys
from pathlib import Path


def handle_validate(args):
    """Handle all validate subcommands."""
    if args.validate_cmd == 'environment':
        return validate_environment(args.config)
    else:
        print("❌ No validate operation specified. Use --help for options.")
        return 1


def validate_environment(config_path=None):
    """Validate environment setup."""
    print("🔍 Validating environment setup...")
    
    tests = [
        ("Python Version", check_python_version),
        ("Library Imports", check_library_imports),
        ("Graphviz", check_graphviz),
        ("Config File", lambda: check_config_file(config_path)),
    ]
    
    passed = 0
    total = len(tests)
    
    for test_name, test_func in tests:
        print(f"\n--- {test_name} ---")
        try:
            if test_func():
                passed += 1
            else:
                print(f"✗ {test_name} failed")
        except Exception as e:
            print(f"✗ {test_name} failed with exception: {e}")
    
    print(f"\n📋 Results:")
    print(f"   Passed: {passed}/{total}")
    
    if passed == total:
        print("🎉 All checks passed! Environment is ready.")
        return 0
    else:
        print("❌ Some checks failed. Please check the issues above.")
        return 1


def check_python_version():
    """Check Python version."""
    print(f"Python version: {sys.version}")
    if sys.version_info >= (3, 9):
        print("✓ Python 3.9+ detected")
        return True
    else:
        print("✗ Python 3.9+ required")
        return False


def check_library_imports():
    """Check the graph and config libraries import."""
    try:
        import networkx
        import pydot
        import yaml
        print(f"✓ networkx {networkx.__version__}, pydot {pydot.__version__}, PyYAML {yaml.__version__}")
        return True
    except ImportError as e:
        print(f"✗ Import error: {e}")
        return False


def check_graphviz():
    """Check the graphviz layout binary is on PATH."""
    dot = shutil.which('dot')
    if dot is None:
        print("✗ graphviz 'dot' not found on PATH")
        return False
    print(f"✓ graphviz found at {dot}")
    return True


def check_config_file(config_path=None):
    """Check config file exists and is valid."""
    config_path = Path(config_path) if config_path else Path("config.yaml")
    if not config_path.exists():
        print(f"✗ {config_path} not found")
        return False
    
    import yaml
    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)
    
    if not isinstance(config, dict):
        print("✗ Config file must contain a mapping")
        return False
    
    known_sections = ['legend', 'normalization', 'rendering', 'viewer', 'logging']
    unknown_sections = [section for section in config if section not in known_sections]
    
    if unknown_sections:
        print(f"✗ Unknown config sections: {unknown_sections}")
        return False
    else:
        print("✓ Config file is valid")
        return True
