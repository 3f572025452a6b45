"""
Data import utilities for reading experimental data files.

Data files hold one point per row: x, y and optionally the uncertainty
sy of y. Further columns are ignored.
"""

import numpy as np

from .exceptions import InvalidArgument


DELIMITERS = [',', ';', '\t']


def _split(line, delimiter):
    return line.split(delimiter) if delimiter else line.split()


def detect_header_lines(filepath, delimiter=None, comments='#'):
    """
    Count leading lines that do not hold numeric data.

    Parameters
    ----------
    filepath : str
        Path to file
    delimiter : str or None, optional
        Column delimiter, None for whitespace
    comments : str, optional
        Character indicating comment lines, default '#'

    Returns
    -------
    int
        Number of header lines before the first data row
    """
    skip = 0
    with open(filepath, 'r') as f:
        for line in f:
            line = line.strip()
            # Skip empty lines and comment lines
            if not line or line.startswith(comments):
                skip += 1
                continue
            parts = _split(line, delimiter)
            try:
                float(parts[0])
                float(parts[1])
                break
            except (ValueError, IndexError):
                # This line doesn't contain numeric data - treat as header
                skip += 1
    return skip


def auto_detect_delimiter(filepath, max_lines=10, comments='#'):
    """
    Automatically detect delimiter in text file.

    Parameters
    ----------
    filepath : str
        Path to file
    max_lines : int, optional
        Number of lines to check, default 10

    Returns
    -------
    str or None
        Detected delimiter (comma, semicolon, tab) or None for whitespace
    """
    lines = []
    with open(filepath, 'r') as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith(comments):
                lines.append(line)
            if len(lines) >= max_lines:
                break

    for delim in DELIMITERS:
        counts = [line.count(delim) for line in lines]
        # Consistent count over the sampled lines, ignoring a header line
        if counts and counts[-1] > 0 and len(set(counts[1:] or counts)) == 1:
            return delim

    return None


def load_data_file(filepath, delimiter=None, comments='#'):
    """
    Load x, y and sy columns from a text or CSV file.

    Parameters
    ----------
    filepath : str
        Path to data file
    delimiter : str or None, optional
        Column delimiter. Auto-detected if None.
    comments : str, optional
        Character indicating comment lines, default '#'

    Returns
    -------
    x : ndarray
        Domain (first column)
    y : ndarray
        Observed values (second column)
    sy : ndarray
        Uncertainties (third column), ones if the file has two columns

    Raises
    ------
    InvalidArgument
        If the file cannot be parsed or the data are invalid
    """
    if delimiter is None:
        delimiter = auto_detect_delimiter(filepath, comments=comments)
    skip_header = detect_header_lines(filepath, delimiter=delimiter, comments=comments)

    try:
        data = np.loadtxt(filepath, delimiter=delimiter, comments=comments,
                          skiprows=skip_header, ndmin=2)
    except ValueError as e:
        raise InvalidArgument(f"Error loading file '{filepath}': {e}")

    if data.shape[0] == 0:
        raise InvalidArgument(f"File '{filepath}' contains no data rows")
    if data.shape[1] < 2:
        raise InvalidArgument(f"File '{filepath}' must have at least 2 columns, found {data.shape[1]}")

    x = data[:, 0]
    y = data[:, 1]
    sy = data[:, 2] if data.shape[1] > 2 else np.ones_like(y)

    validate_data(x, y, sy)
    return x, y, sy


def validate_data(x, y, sy):
    """
    Validate experimental data.

    Raises
    ------
    InvalidArgument
        If lengths differ, values are not finite or uncertainties are not
        strictly positive
    """
    x = np.asarray(x)
    y = np.asarray(y)
    sy = np.asarray(sy)

    if not len(x) == len(y) == len(sy):
        raise InvalidArgument(f"x, y and sy must have same length: {len(x)}, {len(y)}, {len(sy)}")

    if not np.all(np.isfinite(x)):
        raise InvalidArgument("X data contains NaN or Inf")

    if not np.all(np.isfinite(y)):
        raise InvalidArgument("Y data contains NaN or Inf")

    if not np.all(np.isfinite(sy)) or np.any(sy <= 0):
        raise InvalidArgument("Uncertainties must be finite and strictly positive")

    return True
