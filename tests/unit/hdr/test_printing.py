"""Unit tests for percentile distribution reports."""

import io

import pytest

from chistogram.hdr import FormatType, HistogramIOError, percentiles_print


@pytest.fixture
def single_value_histogram(make_histogram):
    """A histogram holding the single value 10."""
    h = make_histogram(highest=1000)
    h.record_value(10)
    return h


def test_csv_report(single_value_histogram):
    out = io.StringIO()
    percentiles_print(single_value_histogram, out, fmt=FormatType.CSV)
    assert out.getvalue().splitlines() == [
        "Value,Percentile,TotalCount,1/(1-Percentile)",
        "10.000,0.000000,1,1.00",
        "10.000,1.000000,1,inf",
    ]


def test_classic_report(single_value_histogram):
    out = io.StringIO()
    percentiles_print(single_value_histogram, out)
    lines = out.getvalue().splitlines()

    assert lines[0] == f"{'Value':>12} {'Percentile':>12} {'TotalCount':>12} {'1/(1-Percentile)':>12}"
    assert lines[1] == ""
    assert lines[2] == f"{10.0:12.3f} {0.0:12f} {1:12d} {1.0:12.2f}"
    assert lines[3] == f"{10.0:12.3f} {1.0:12f} {1:12d} {'inf':>12}"
    assert lines[4] == f"#[Mean    = {10.0:12.3f}, StdDeviation   = {0.0:12.3f}]"
    assert lines[5] == f"#[Max     = {10.0:12.3f}, Total count    = {1:12d}]"
    assert lines[6] == f"#[Buckets = {1:12d}, SubBuckets     = {2048:12d}]"


def test_value_scale_divides_values(single_value_histogram):
    out = io.StringIO()
    percentiles_print(single_value_histogram, out, value_scale=10.0, fmt=FormatType.CSV)
    assert "1.000,0.000000,1,1.00" in out.getvalue().splitlines()


def test_significant_figures_set_value_precision(make_histogram):
    h = make_histogram(highest=1000, sig_figs=1)
    h.record_value(7)
    out = io.StringIO()
    percentiles_print(h, out, fmt=FormatType.CSV)
    assert out.getvalue().splitlines()[1] == "7.0,0.000000,1,1.00"


def test_ticks_control_report_density(raw_histogram):
    coarse, fine = io.StringIO(), io.StringIO()
    percentiles_print(raw_histogram, coarse, ticks_per_half_distance=1, fmt=FormatType.CSV)
    percentiles_print(raw_histogram, fine, ticks_per_half_distance=10, fmt=FormatType.CSV)
    assert len(coarse.getvalue().splitlines()) < len(fine.getvalue().splitlines())


def test_closed_stream_raises_io_error(single_value_histogram):
    out = io.StringIO()
    out.close()
    with pytest.raises(HistogramIOError, match="Failed to write histogram report"):
        percentiles_print(single_value_histogram, out)


def test_os_error_is_wrapped(single_value_histogram):
    class BrokenStream(io.StringIO):
        """Stream whose writes fail like a full disk."""

        def write(self, s):
            raise OSError(28, "No space left on device")

    with pytest.raises(HistogramIOError) as excinfo:
        percentiles_print(single_value_histogram, BrokenStream())
    assert "No space left on device" in excinfo.value.reason
    assert isinstance(excinfo.value.__cause__, OSError)
