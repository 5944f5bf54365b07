"""
Run with: python -m sofarotator
"""
import sys

from sofarotator.app.main import main

if __name__ == "__main__":
    sys.exit(main())
