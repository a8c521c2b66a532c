# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Snippet-to-source transformation.

  - dependencies: `extern crate` declarations -> Cargo.toml [dependencies]
  - wrapper: snippet -> src/main.rs with a synthesized `fn main()`

Both are pure text transforms; nothing here touches the filesystem.
"""
