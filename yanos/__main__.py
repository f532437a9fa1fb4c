import sys

from yanos.cli import main

sys.exit(main())
