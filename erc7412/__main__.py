import sys

from erc7412.main import main

sys.exit(main())
