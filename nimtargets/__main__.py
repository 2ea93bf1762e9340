# SPDX-License-Identifier: BSD-3-Clause
from nimtargets.base.scan import main

main()
