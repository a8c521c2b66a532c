# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The on-disk side of a run: the temporary Cargo project and the target/ cache.
"""
