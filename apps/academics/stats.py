# academics/stats.py
"""
Enrollment statistics for registrar reports
"""

from django.db.models import Count
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# ENROLLMENT SUMMARY
# =============================================================================

def get_enrollment_summary(filters=None):
    """
    Enrollment counts with breakdowns by status, department and year level

    Args:
        filters (dict): Optional filters to apply
            - academic_year: AcademicYear instance or id
            - semester: '1st' | '2nd' | 'Summer'

    Returns:
        dict: {
            'total': int,
            'by_status': [{'status', 'count'}],
            'by_department': [{'department', 'count'}],
            'by_year_level': [{'year_level', 'count'}],
        }
    """
    from .models import Enrollment

    enrollments = Enrollment.objects.all()

    if filters:
        if filters.get('academic_year'):
            enrollments = enrollments.filter(academic_year=filters['academic_year'])
        if filters.get('semester'):
            enrollments = enrollments.filter(semester=filters['semester'])

    def breakdown(field):
        return list(
            enrollments.values(field)
            .annotate(count=Count('id'))
            .order_by(field)
        )

    stats = {
        'total': enrollments.count(),
        'by_status': breakdown('status'),
        'by_department': breakdown('department'),
        'by_year_level': breakdown('year_level'),
    }

    logger.debug(f"Enrollment summary computed: {stats['total']} enrollments")
    return stats
