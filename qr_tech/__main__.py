import sys

from qr_tech.cli import main

sys.exit(main())
