from archivist.core.models import FileSystemMode, FindMode, DEFAULT_IGNORE_PATTERNS

FIND_MODE_ALIASES = {
    "exact": FindMode.EXACT,
    "similar": FindMode.SIMILAR,
    "phash": FindMode.SIMILAR,
}

FIND_MODE_CHOICES = list(FIND_MODE_ALIASES.keys())

FIND_MODE_HELP_TEXT = (
    "How duplicates are detected:\n"
    "  exact    : Size → Full content hash (byte-identical files)\n"
    "  similar  : Perceptual hash (visually similar images, see --threshold)\n"
    "Example:\n"
    "  %(prog)s -d ~/Archive --mode similar --threshold 4 -o dups.txt"
)

DEDUP_MODE_HELP_TEXT = (
    "Without --no-dry-run nothing is changed, planned operations are only logged.\n"
    "With --trash deleted files are moved to the system trash instead of being removed."
)

IGNORES_HELP_TEXT = (
    "Shell-style file patterns to ignore (space separated).\n"
    f"Default: {' '.join(DEFAULT_IGNORE_PATTERNS)}"
)


def dedup_file_system_mode(no_dry_run: bool, trash: bool) -> FileSystemMode:
    """Maps dedup flags to a file system mode."""
    if not no_dry_run:
        return FileSystemMode.DRY_RUN
    if trash:
        return FileSystemMode.TRASH
    return FileSystemMode.REAL


EPILOG_TEXT = """
Examples:
  Sort a folder into an archive (YEAR/MM, all/ and origin/ trees)
  %(prog)s sort -s ~/Camera -t ~/Archive

  Same as above, then keep watching the folder for new files
  %(prog)s sort -s ~/Camera -t ~/Archive --watch

  Find byte-identical duplicates inside the archive
  %(prog)s find-duplicates -d ~/Archive -o ~/dups.txt

  Preview deduplication (dry run is the default)
  %(prog)s dedup -d ~/Archive -i ~/dups.txt

  Deduplicate for real, moving deleted files to the trash
  %(prog)s dedup -d ~/Archive -i ~/dups.txt --no-dry-run --trash

  Show capture dates of the files in a folder
  %(prog)s list -d ~/Camera
"""
