# -*- mode: python; lexical-binding: t -*-
# Author: Demo Maintainers
from __future__ import annotations

demo_run = autoload("demo_run", "demo")
put("demo_run", "package", "demo")

# Local Variables:
# no-byte-compile: t
# End:
