"""Reports app package: user-filed problem reports about tools or bookings."""
