"""Allow ``python -m multipart_cleaner``."""

from multipart_cleaner.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
