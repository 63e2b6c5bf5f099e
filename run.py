"""
Entry point for Blueprint Markup

Run this script to start the editor:
    python run.py BLUEPRINT_ID [--api-url URL] [--offline --image PATH]
"""

import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Import and run main
from blueprint_markup.main import main

if __name__ == "__main__":
    main()
