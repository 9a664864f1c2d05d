"""
docbundle - Documentation bundling pipeline.

Turns raw per-library documentation trees into one Markdown file per library:

1. Cleaner: drops non-Markdown artifacts from ``docs/<library>/input``
2. Transformer: rewrites each input page through an LLM, skipping pages whose
   checksum matches the lock file
3. Compiler: concatenates each library's pages into ``public/docs/<library>.md``
"""

__version__ = "0.1.0"
