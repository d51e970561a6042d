import datetime

from ..models import RunReport


def summarize_run(
    report: RunReport,
    input_dir: str,
    output_dir: str,
    club: str | None = None,
) -> str:
    """Builds a human-readable summary of a run.

    Args:
        report: The report of the finished run.
        input_dir: Directory the fixtures were read from.
        output_dir: Directory the calendars were written to.
        club: Optional club needle used for filtering.

    Returns:
        A formatted multi-line summary string.
    """
    today = datetime.date.today().isoformat()
    msg = f"Update calendars: {today}\n"
    msg += (
        f"Written: {report.files_written}, Failed: {report.files_failed}, "
        f"Empty: {report.empty_calendars}"
    )
    msg += (
        f"\nRows: {report.rows_seen}, Relevant: {report.rows_relevant}, "
        f"Dropped: {report.rows_dropped}"
    )

    details = [f"Input: {input_dir}", f"Output: {output_dir}"]
    if club:
        details.append(f"Club: {club}")
    if report.sources_skipped:
        details.append(f"Rejected files: {report.sources_skipped}")

    msg += "\n" + ", ".join(details)

    if report.failed_files:
        msg += "\nFailed files: " + ", ".join(report.failed_files)

    return msg
