"""
Configuration package for the student records service.
"""

from student_records.config.settings import Settings, get_settings, settings

__all__ = ['Settings', 'get_settings', 'settings']
