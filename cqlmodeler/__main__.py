import sys

from cqlmodeler.cli import main

sys.exit(main())
