from netcafe.models.subscription import SubscriptionPlan, PlanName
from netcafe.models.tenant_record import TenantRecord
from netcafe.models.tenant import (
    TENANT_MODELS,
    Role,
    Module,
    Permission,
    User,
    Category,
    Dish,
    Order,
    OrderStatus,
    OrderItem,
    OrderItemStatus,
    Billing,
    PaymentMethod,
    PaymentStatus,
    Feedback,
    Chat,
    Message,
)

MASTER_MODELS = (SubscriptionPlan, TenantRecord)
