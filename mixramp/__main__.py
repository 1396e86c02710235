import sys

from mixramp.main import main

sys.exit(main())
