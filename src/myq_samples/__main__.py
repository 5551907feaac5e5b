"""Module entrypoint.

Allows:
    python -m myq_samples
"""

from __future__ import annotations

from myq_samples.server.samples_server import main

if __name__ == "__main__":
    main()
