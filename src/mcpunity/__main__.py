import sys

from mcpunity.cli import main

sys.exit(main())
