"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Clock-in window
EARLY_CHECKIN_MINUTES = 60
LATE_CHECKIN_CUTOFF_MINUTES = 30
LATE_GRACE_MINUTES = 15

# Schedule creation
ADMIN_LEAD_MINUTES = 30
STAFF_LEAD_HOURS = 24
STAFF_CANCEL_LEAD_HOURS = 24
MAX_SHIFTS_PER_DAY = 2

# Sweeps
AUTO_REJECT_WINDOW_MINUTES = 60

# Overnight end/checkout times earlier than this hour belong to the next day.
NEXT_DAY_CUTOFF_HOUR = 12

DEFAULT_TEMPLATE_HEADCOUNT = 1
DEFAULT_HISTORY_DAYS = 30

AUTO_REJECT_REASON = "Tự động từ chối do lịch chưa được xác nhận khi còn dưới 1 tiếng trước giờ vào ca"
AUTO_ABSENT_NOTE = "Tự động đánh dấu vắng mặt do không chấm công"
DEFAULT_REJECT_REASON = "Không có lý do cụ thể"
CANCELLED_BY_STAFF_NOTE = "[Hủy bởi nhân viên]"
