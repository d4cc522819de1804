"""gfx2o: PNG graphics to object code converter.

WHY: Game builds need image assets as linkable data. Hand-maintaining
converter flags for every sprite, tileset, and palette does not scale,
so each asset carries its own settings in its filename
(``hero.8t.iml64.png``) and one command turns it into an object file.

HOW: Four-stage pipeline: decode the filename metadata (core),
run grit to produce binary blobs, turn each blob into a symbol-tagged
assembly fragment, and assemble the fragments (toolchain). Each stage
is independently testable.

RULES:
- The filename is the only source of conversion settings
- Symbol names are reproducible: derived from the asset's path below
  the data root, never from temporary paths
- Image decoding, compression, and assembly are delegated to external
  executables
"""

__version__ = "0.1.0"
