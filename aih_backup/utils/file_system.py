import os
import json
import logging

logger = logging.getLogger(__name__)

FILE_MARKER = "[FILE_CONTENT]"
MAX_TREE_FILE_SIZE = 1024 * 1024  # 1 MiB
EXCLUDED_SUFFIXES = (".DS_Store",)

def is_excluded(item_name, suffixes=EXCLUDED_SUFFIXES):
    """Checks whether a file name carries an OS metadata suffix."""
    return item_name.endswith(suffixes)

def clean_name(name):
    """
    File name as valid text.

    Bytes that are not UTF-8 come back from os.listdir as lone surrogates,
    which no JSON store accepts. They are replaced with U+FFFD.
    """
    return name.encode("utf-8", "surrogateescape").decode("utf-8", "replace")

def to_json(value):
    """Compact JSON, the form fingerprints are computed over."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)

def fingerprint(text):
    """
    Short change-detection fingerprint of a string.

    Folds the UTF-16 code units of ``text`` with ``h = h * 31 + unit``,
    wrapping to a signed 32-bit integer after each step, and renders the
    absolute value as lowercase hex. Not cryptographic.
    """
    data = text.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
        if h & 0x80000000:
            h -= 0x100000000
    return format(abs(h), "x")

def get_directory_tree(directory):
    """
    Describes the shape of ``directory`` as a nested dict.

    Subdirectories map to nested dicts and files map to FILE_MARKER. Files
    bigger than MAX_TREE_FILE_SIZE and OS metadata files are left out.
    Entries are visited in sorted order and keyed by clean_name. Raises
    OSError when ``directory`` is missing or unreadable.
    """
    items = {}
    for name in sorted(os.listdir(directory)):
        full_path = os.path.join(directory, name)
        if os.path.isdir(full_path):
            items[clean_name(name)] = get_directory_tree(full_path)
        elif is_excluded(name):
            continue
        else:
            size = os.stat(full_path).st_size
            if size > MAX_TREE_FILE_SIZE:
                logger.debug(f"Skipping file larger than 1 MiB: '{full_path}' ({size} bytes)")
                continue
            items[clean_name(name)] = FILE_MARKER
    return items

def restore_directory_tree(base_dir, tree):
    """
    Recreates the directories described by ``tree`` below ``base_dir``.

    FILE_MARKER leaves are left alone since their content was never stored.
    Any other string leaf is written out as the file's content. Existing
    files and directories that are not part of the tree are kept.
    """
    for name, content in tree.items():
        full_path = os.path.join(base_dir, name)
        if isinstance(content, dict):
            os.makedirs(full_path, exist_ok=True)
            restore_directory_tree(full_path, content)
        elif content != FILE_MARKER:
            with open(full_path, "w", encoding="utf-8", newline="") as f:
                f.write(content)

def count_tree_files(tree):
    """Number of file entries in a directory tree."""
    total = 0
    for content in tree.values():
        if isinstance(content, dict):
            total += count_tree_files(content)
        else:
            total += 1
    return total
