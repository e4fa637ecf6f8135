"""
Hebrew Reader Backend — Hebrew Text Utilities
=============================================

Pure functions over Hebrew strings: niqqud detection/removal, parsing of
syllable-split model output, and validation of morphology analysis items.
Nothing in this package performs I/O.
"""
