import sys

from searchchat.api.cli import main


sys.exit(main())
