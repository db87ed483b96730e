DESCRIPTION_TEXT = (
    "deldup: delete files that already exist, byte for byte, in an official directory"
)

OFFICIAL_HELP_TEXT = "Official directory (the repository of truth); never modified"

NEW_HELP_TEXT = "Directory with new files; duplicates found here are deleted"

ENTER_ZIP_HELP_TEXT = (
    "Enter .zip files while indexing the official directory:\n"
    "  their entries are matched as if they were loose files"
)

DUMP_HELP_TEXT = (
    "Dump the official directory index to stdout as CSV\n"
    "  (filename, size, crc32_64k, date) and exit"
)

EPILOG_TEXT = """
Examples:
  Ask before deleting each file in ~/Card that is already in ~/Photos
  %(prog)s ~/Photos ~/Card

  Same, looking inside .zip files of ~/Photos, deleting without asking
  %(prog)s -yz ~/Photos ~/Card

  Export the index of ~/Photos
  %(prog)s -dz ~/Photos > photos.csv

Deleted files are moved to the system trash unless --permanent is given.
Answer 'Y' at the prompt to delete all remaining duplicates.
"""
