import sys

from i3netrate.app import main

sys.exit(main())
