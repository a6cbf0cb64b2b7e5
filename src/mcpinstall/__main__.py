import sys

from mcpinstall.cli.main import main

sys.exit(main())
