"""Creates, lists and previews notes stored as Typst or Markdown files in a directory.

If you installed via ``pip``, run ``noxe -h`` to get help.

To use the Python API, look at :class:`noxe.api.Noxe`
"""
