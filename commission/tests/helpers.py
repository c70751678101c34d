from decimal import Decimal
from itertools import count

from accounts.models import Role, User
from agent_applications.tests.helpers import create_application
from commission.models import Agent
from orders.models import Order, OrderItem

_references = count(1)


def create_agent(email='agent@test.com', **agent_fields):
    user = User.objects.create_user(
        email=email, password='password123', first_name='Faith', last_name='Njeri', role=Role.AGENT
    )
    application = create_application(user, status='approved')
    return Agent.objects.create(user=user, application=application, **agent_fields)


def create_order(agent, amount, status='paid', created_at=None, customer=None, **fields):
    customer = customer or agent.user
    reference = f'ORD-{next(_references):05d}'
    order = Order.objects.create(
        user=customer,
        agent=agent,
        order_reference=reference,
        full_name=fields.pop('full_name', 'Kevin Mwangi'),
        email=fields.pop('email', 'kevin@example.com'),
        phone=fields.pop('phone', '0712000000'),
        total_amount=Decimal(amount),
        status=status,
        **fields
    )
    if created_at is not None:
        Order.objects.filter(pk=order.pk).update(created_at=created_at)
        order.refresh_from_db()
    return order


def add_item(order, name, quantity, unit_price):
    unit_price = Decimal(unit_price)
    return OrderItem.objects.create(
        order=order, product_name=name, quantity=quantity,
        unit_price=unit_price, total_price=unit_price * quantity,
    )
