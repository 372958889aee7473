import sys

from qrsolid.cli import main

sys.exit(main())
