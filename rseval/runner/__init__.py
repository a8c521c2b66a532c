# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Running cargo build and the binary it produces."""
