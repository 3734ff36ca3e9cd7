import sys

from compar.cli.main import main

sys.exit(main())
