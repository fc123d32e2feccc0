import sys

from tickle.main import main

sys.exit(main())
