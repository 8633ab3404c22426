# JobTrack - Job Application Tracker
"""
JobTrack - Front-end service for a personal job application tracker.

Lists and edits job applications, tasks and calendar events stored by the
tracker API, and builds the calendar month grid and daily agenda.
"""

__version__ = "0.1.0"
__author__ = "JobTrack"
__description__ = "Job application tracking front-end"
