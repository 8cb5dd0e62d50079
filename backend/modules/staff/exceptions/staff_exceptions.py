class StaffNotFoundError(LookupError):
    """Raised when a staff member id does not exist."""

    def __init__(self, staff_member_id: int):
        super().__init__(f"Staff member with ID {staff_member_id} not found")
        self.staff_member_id = staff_member_id
