"""
Sample data used when nothing has ever been fetched or cached.
"""

from ballotsync.models import Candidate, Student


def default_students() -> list[Student]:
    return [
        Student("2023001", "Juan Pérez", "11-A", True),
        Student("2023002", "María García", "11-B", True),
        Student("2023003", "Carlos López", "10-A", True),
        Student("2023004", "Ana Martínez", "10-B", True),
        Student("2023005", "Luis Rodríguez", "9-A", True),
    ]


def default_candidates() -> list[Candidate]:
    return [
        Candidate(
            identifier=1,
            name="Sofía Hernández",
            short_code="SH",
            photo_reference="https://via.placeholder.com/150/667eea/ffffff?text=SH",
            platform_statement="Mejores espacios recreativos y deportivos",
        ),
        Candidate(
            identifier=2,
            name="Diego Morales",
            short_code="DM",
            photo_reference="https://via.placeholder.com/150/764ba2/ffffff?text=DM",
            platform_statement="Tecnología en aulas y laboratorios modernos",
        ),
        Candidate(
            identifier=3,
            name="Camila Torres",
            short_code="CT",
            photo_reference="https://via.placeholder.com/150/51cf66/ffffff?text=CT",
            platform_statement="Actividades culturales y artísticas",
        ),
    ]
