"""
Data import utilities for reading two-column data files.
"""

import numpy as np


def load_txt_file(filepath, delimiter=None, comments='#', skip_header=0):
    """
    Load data from TXT file with automatic header detection.

    Parameters
    ----------
    filepath : str
        Path to TXT file
    delimiter : str or None, optional
        Delimiter between columns. If None, split on whitespace
    comments : str, optional
        Character indicating comment lines, default '#'
    skip_header : int, optional
        Number of header lines to skip. If 0, leading lines that do not
        start with two numbers are skipped

    Returns
    -------
    x : ndarray
        X-axis data (first column)
    y : ndarray
        Y-axis data (second column)

    Raises
    ------
    ValueError
        If file cannot be parsed or doesn't have at least 2 columns
    """
    auto_skip = 0
    with open(filepath, 'r') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith(comments):
                auto_skip += 1
                continue

            parts = line.split(delimiter) if delimiter else line.split()
            try:
                float(parts[0])
                float(parts[1])
                break
            except (ValueError, IndexError):
                # Non-numeric line, treat as header
                auto_skip += 1

    if skip_header == 0:
        skip_header = auto_skip

    try:
        data = np.loadtxt(filepath, delimiter=delimiter, comments=comments,
                          skiprows=skip_header, ndmin=2)
    except ValueError as e:
        raise ValueError(f"Error loading file '{filepath}': {e}") from e

    if data.size == 0:
        raise ValueError(f"Error loading file '{filepath}': no data found")
    if data.shape[1] < 2:
        raise ValueError(f"File must have at least 2 columns, found {data.shape[1]}")

    x = data[:, 0]
    y = data[:, 1]

    if not np.all(np.isfinite(x)):
        raise ValueError("X data contains NaN or Inf values")
    if not np.all(np.isfinite(y)):
        raise ValueError("Y data contains NaN or Inf values")

    return x, y


def auto_detect_delimiter(filepath, max_lines=10):
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
        Detected delimiter (comma or tab), or None for whitespace
    """
    lines = []
    with open(filepath, 'r') as f:
        for i, line in enumerate(f):
            if i >= max_lines:
                break
            line = line.strip()
            if line and not line.startswith('#'):
                lines.append(line)

    if not lines:
        return None

    for delim in (',', '\t'):
        counts = [line.count(delim) for line in lines]
        # Header lines may differ, so only the last lines need to agree
        if counts[-1] > 0 and len(set(counts[-3:])) == 1:
            return delim

    return None


def load_data_file(filepath):
    """
    Load data file with automatic format detection.

    Parameters
    ----------
    filepath : str
        Path to data file

    Returns
    -------
    x : ndarray
        X-axis data
    y : ndarray
        Y-axis data

    Raises
    ------
    ValueError
        If the file cannot be parsed with the detected or whitespace
        delimiter
    """
    delimiter = auto_detect_delimiter(filepath)

    try:
        return load_txt_file(filepath, delimiter=delimiter)
    except ValueError as e:
        if delimiter is None:
            raise
        try:
            return load_txt_file(filepath, delimiter=None)
        except ValueError:
            raise ValueError(f"Could not load data file: {e}") from e
