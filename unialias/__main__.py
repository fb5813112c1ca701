import sys

from unialias.main import main

sys.exit(main())
