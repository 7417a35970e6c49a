"""MeetSync API package."""
