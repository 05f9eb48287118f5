# This source code is part of the ProtCompare package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import sys
from .cli import main

sys.exit(main())
