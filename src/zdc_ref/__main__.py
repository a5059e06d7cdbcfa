"""Allow running as ``python -m zdc_ref``."""

from .cli import main

if __name__ == "__main__":
    main()
