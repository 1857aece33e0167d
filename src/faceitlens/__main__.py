"""
FaceitLens CLI Entry Point

Allows running the package as a module: python -m faceitlens
"""

from faceitlens.cli import main

if __name__ == "__main__":
    main()
