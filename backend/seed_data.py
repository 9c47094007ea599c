"""Seed database with demo data."""
from maintrack.auth import get_password_hash
from maintrack.config import settings
from maintrack.database import build_engine, build_session_factory
from maintrack.models import (
    Equipment, MaintenanceRequest, Team, TeamMember, User, WorkCenter
)
from datetime import date, timedelta
import uuid


def seed():
    """Seed database with demo data."""
    engine = build_engine(settings)
    db = build_session_factory(engine)()

    try:
        # Create teams
        teams = [
            Team(
                id=uuid.UUID('00000000-0000-0000-0000-000000000011'),
                name="Mechanics",
                description="Mechanical repairs and preventive service",
            ),
            Team(
                id=uuid.UUID('00000000-0000-0000-0000-000000000012'),
                name="Electrical",
                description="Electrical systems and controls",
            ),
        ]
        db.add_all(teams)
        db.flush()

        # Create users
        users_data = [
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000101'),
                'email': 'admin@maintrack.local',
                'password': 'admin123',
                'name': 'Administrator',
                'role': 'admin'
            },
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000102'),
                'email': 'manager@maintrack.local',
                'password': 'manager123',
                'name': 'Morgan Manager',
                'role': 'manager'
            },
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000103'),
                'email': 'mech@maintrack.local',
                'password': 'mech1234',
                'name': 'Alex Mechanic',
                'role': 'technician'
            },
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000104'),
                'email': 'volt@maintrack.local',
                'password': 'volt1234',
                'name': 'Sam Electrician',
                'role': 'technician'
            },
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000105'),
                'email': 'employee@maintrack.local',
                'password': 'employee123',
                'name': 'Jamie Employee',
                'role': 'portal'
            },
        ]

        users = []
        for user_data in users_data:
            password = user_data.pop('password')
            user = User(password_hash=get_password_hash(password), **user_data)
            db.add(user)
            users.append(user)
        db.flush()

        admin, manager, mechanic, electrician, employee = users
        db.add_all([
            TeamMember(team_id=teams[0].id, user_id=mechanic.id),
            TeamMember(team_id=teams[1].id, user_id=electrician.id),
            TeamMember(team_id=teams[0].id, user_id=manager.id),
        ])

        # Work centers (the second one has no default team on purpose)
        work_centers = [
            WorkCenter(
                id=uuid.UUID('00000000-0000-0000-0000-000000000201'),
                name="Assembly Line 1",
                code="ASM-01",
                default_team_id=teams[0].id,
            ),
            WorkCenter(
                id=uuid.UUID('00000000-0000-0000-0000-000000000202'),
                name="Paint Shop",
                code="PNT-01",
                default_team_id=None,
            ),
        ]
        db.add_all(work_centers)
        db.flush()

        equipment_data = [
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000301'),
                'name': 'CNC Mill',
                'serial_number': 'CNC-0001',
                'department': 'machining',
                'location': 'Hall A',
                'maintenance_team_id': teams[0].id,
                'default_technician_id': mechanic.id,
                'work_center_id': work_centers[0].id,
                'employee_owner_id': employee.id,
            },
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000302'),
                'name': 'Control Cabinet',
                'serial_number': 'ELC-0001',
                'department': 'assembly',
                'location': 'Hall B',
                'maintenance_team_id': teams[1].id,
                'default_technician_id': electrician.id,
            },
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000303'),
                'name': 'Forklift',
                'serial_number': 'FLT-0001',
                'department': 'logistics',
                'location': 'Warehouse',
                'maintenance_team_id': teams[0].id,
            },
            {
                'id': uuid.UUID('00000000-0000-0000-0000-000000000304'),
                'name': 'Label Printer',
                'serial_number': 'PRN-0001',
                'department': 'logistics',
                'location': 'Warehouse',
            },
        ]

        equipment = []
        for item in equipment_data:
            record = Equipment(status='active', **item)
            db.add(record)
            equipment.append(record)
        db.flush()

        today = date.today()
        requests_data = [
            {
                'subject': 'Spindle vibration',
                'description': 'Noticeable vibration above 8000 rpm',
                'type': 'corrective',
                'category': 'equipment',
                'equipment_id': equipment[0].id,
                'team_id': teams[0].id,
                'assigned_technician_id': mechanic.id,
                'created_by': employee.id,
            },
            {
                'subject': 'Quarterly cabinet inspection',
                'type': 'preventive',
                'category': 'equipment',
                'equipment_id': equipment[1].id,
                'team_id': teams[1].id,
                'assigned_technician_id': electrician.id,
                'scheduled_date': today + timedelta(days=14),
                'created_by': manager.id,
            },
            {
                'subject': 'Conveyor belt alignment',
                'type': 'corrective',
                'category': 'work_center',
                'work_center_id': work_centers[0].id,
                'team_id': teams[0].id,
                'state': 'in_progress',
                'assigned_technician_id': mechanic.id,
                'created_by': mechanic.id,
            },
        ]

        for request_data in requests_data:
            db.add(MaintenanceRequest(**request_data))

        db.commit()
        print("Database seeded successfully!")
        print("\nDemo users:")
        print("  admin@maintrack.local/admin123 (Administrator)")
        print("  manager@maintrack.local/manager123 (Manager)")
        print("  mech@maintrack.local/mech1234 (Technician, Mechanics)")
        print("  volt@maintrack.local/volt1234 (Technician, Electrical)")
        print("  employee@maintrack.local/employee123 (Portal)")

    except Exception as e:
        db.rollback()
        print(f"Error seeding database: {e}")
        raise
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    seed()
