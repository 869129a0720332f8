import sys

from foldercompare.main import main

sys.exit(main())
