"""Example: drive the service layer directly (no HTTP layer).

Checks a resident in, requests a checkout, approves it and previews what the
stay away would cost under the resident's active rule.
"""

from src.hostel_attendance.hostel_attendance.core.enums import PersonCategory
from src.hostel_attendance.hostel_attendance.deductions.model import NoActiveRule
from src.hostel_attendance.hostel_attendance.main import create_container


def main():
    container = create_container()
    attendance = container.attendance_service

    record = attendance.check_in(PersonCategory.RESIDENT, 1, location_id=1)
    record = attendance.request_checkout(PersonCategory.RESIDENT, 1, remarks="Weekend at home")
    record = attendance.approve(record.record_id)
    print(record)

    preview = container.preview_service.preview_table(PersonCategory.RESIDENT, 1)
    if isinstance(preview, NoActiveRule):
        print("No active checkout rule")
    else:
        for estimate in preview.estimates:
            print(f"{estimate.duration_hours:>4}h -> {estimate.deducted_amount:.2f}")

    print(container.statistics_service.current_statistics(PersonCategory.RESIDENT))


if __name__ == "__main__":
    main()
