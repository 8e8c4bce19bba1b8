"""Allow ``python -m yamdocs``."""

from yamdocs.cli import main

raise SystemExit(main())
