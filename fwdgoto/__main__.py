# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
# author: Sławomir Liszniański; created: 2026-10-19
import sys

from fwdgoto.fgotoc import main

sys.exit(main())
