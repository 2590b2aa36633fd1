from cms_admin.models.admin_user import SUPER_ADMIN_ROLE_ID, AdminRole, AdminUser, admin_users_roles

__all__ = [
    "SUPER_ADMIN_ROLE_ID",
    "AdminRole",
    "AdminUser",
    "admin_users_roles",
]
