import numpy as np
import pytest

from easyfit.data_import import auto_detect_delimiter, load_data_file, load_txt_file
from easyfit.data_preprocessing import check_data, crop_roi, data_span, fine_mesh


def test_check_data_accepts_columns():
    x, y = check_data(np.array([[1], [2], [3]]), [4, 5, 6])
    assert x.shape == (3,)
    assert x.dtype == float
    np.testing.assert_array_equal(y, [4.0, 5.0, 6.0])


def test_check_data_returns_copies():
    x0 = np.array([1.0, 2.0])
    x, _ = check_data(x0, [1.0, 2.0])
    x[0] = 10.0
    assert x0[0] == 1.0


@pytest.mark.parametrize('x, y, message', [
    ([1.0, 2.0, 3.0], [1.0, 2.0], "same length"),
    (np.ones((2, 2)), [1.0, 2.0], "Only 1D"),
    ([1.0], [1.0], "at least 2"),
    ([1.0, np.nan], [1.0, 2.0], "NaN"),
    ([1.0, 2.0], [1.0, np.inf], "NaN or Inf"),
])
def test_check_data_rejects(x, y, message):
    with pytest.raises(ValueError, match=message):
        check_data(x, y)


def test_crop_roi():
    x = np.arange(10.0)
    x_roi, y_roi = crop_roi(x, 2 * x, x_min=2.0, x_max=5.0)
    np.testing.assert_array_equal(x_roi, [2.0, 3.0, 4.0, 5.0])
    np.testing.assert_array_equal(y_roi, [4.0, 6.0, 8.0, 10.0])


def test_data_span():
    assert data_span([-3.0, 1.0], [2.0, 0.5]) == 3.0
    assert data_span([0.0, 0.0], [0.0, 0.0]) == 1.0


def test_fine_mesh():
    mesh = fine_mesh([3.0, 1.0, 2.0], fine=4)
    np.testing.assert_allclose(mesh, [1.0, 1.5, 2.0, 2.5, 3.0])


def test_load_whitespace_file_with_header(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("# sample\nTime Signal\n0 1\n1 3\n2 5\n")
    x, y = load_data_file(str(path))
    np.testing.assert_array_equal(x, [0.0, 1.0, 2.0])
    np.testing.assert_array_equal(y, [1.0, 3.0, 5.0])


def test_load_csv_file(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("x,y\n0.5,1.5\n1.5,2.5\n2.5,3.5\n")
    assert auto_detect_delimiter(str(path)) == ','
    x, y = load_data_file(str(path))
    np.testing.assert_array_equal(x, [0.5, 1.5, 2.5])
    np.testing.assert_array_equal(y, [1.5, 2.5, 3.5])


def test_load_tab_file_with_extra_columns(tmp_path):
    path = tmp_path / "data.tsv"
    path.write_text("1\t2\t9\n3\t4\t9\n")
    x, y = load_txt_file(str(path), delimiter='\t')
    np.testing.assert_array_equal(x, [1.0, 3.0])
    np.testing.assert_array_equal(y, [2.0, 4.0])


def test_load_single_column_fails(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("1\n2\n3\n")
    with pytest.raises(ValueError):
        load_data_file(str(path))


def test_load_non_numeric_fails(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("1 2\n3 abc\n")
    with pytest.raises(ValueError, match="Error loading file"):
        load_data_file(str(path))
