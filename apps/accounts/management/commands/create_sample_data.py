"""
Management command to create sample venue data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- 1 superuser and 5 staff logins (manager, hall, cashier, 2 casts)
- Cast profiles with a payroll rule assigned
- Nomination types
- 8 tables and a drinks menu
- 6 customers with three months of completed visits
- Bottle keeps for the regulars
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from decimal import Decimal
from datetime import date, timedelta
import random

from apps.accounts.models import User, StaffRole
from apps.bottle_keeps.models import BottleKeep, BottleKeepUsage, BottleKeepMovement
from apps.bottle_keeps.services import create_bottle_keep
from apps.casts.models import CastProfile
from apps.customers.models import Customer
from apps.inventory.models import Product, InventoryMovement
from apps.payroll.models import PayrollRule, PayrollRuleAssignment, NominationType
from apps.payroll.services import create_rule, assign_rule
from apps.staff.models import Staff
from apps.tables.models import Table
from apps.visits.models import Visit, VisitStatus, PaymentStatus, PaymentMethod


class Command(BaseCommand):
    help = 'Create sample venue data for testing the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing data before creating new sample data',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        casts = self.create_casts(users)
        self.create_nomination_types()
        self.create_payroll_rule(casts)
        tables = self.create_tables()
        products = self.create_products()
        customers = self.create_customers(users['manager'])
        self.create_visits(customers, tables)
        self.create_bottle_keeps(customers, products)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Test accounts:')
        self.stdout.write('  admin@example.com / admin123 (superuser)')
        for key in ('manager', 'hall', 'cashier', 'rina', 'mio'):
            self.stdout.write(f'  {users[key].email} / password123')

    def clear_data(self):
        """Clear venue data created by this command."""
        BottleKeepUsage.objects.all().delete()
        BottleKeepMovement.objects.all().delete()
        BottleKeep.objects.all().delete()
        Table.objects.update(current_visit=None)
        Visit.objects.all().delete()
        Customer.objects.all().delete()
        InventoryMovement.objects.all().delete()
        Product.objects.all().delete()
        Table.objects.all().delete()
        PayrollRuleAssignment.objects.all().delete()
        PayrollRule.objects.all().delete()
        NominationType.objects.all().delete()
        CastProfile.objects.all().delete()
        Staff.objects.all().delete()
        User.objects.filter(is_superuser=False).delete()
        User.objects.filter(email='admin@example.com').delete()

    def create_users(self):
        """Create the superuser and one login per staff role."""
        self.stdout.write('  Creating users...')

        admin, _ = User.objects.get_or_create(
            email='admin@example.com',
            defaults={
                'display_name': 'Admin User',
                'is_staff': True,
                'is_superuser': True,
            }
        )
        admin.set_password('admin123')
        admin.save()

        staff_data = [
            ('manager', 'Sato Kenji', StaffRole.MANAGER),
            ('hall', 'Tanaka Yuto', StaffRole.HALL),
            ('cashier', 'Ito Miki', StaffRole.CASHIER),
            ('rina', 'Kobayashi Rina', StaffRole.CAST),
            ('mio', 'Nakamura Mio', StaffRole.CAST),
        ]

        users = {'admin': admin}
        for key, full_name, role in staff_data:
            user, _ = User.objects.get_or_create(
                email=f'{key}@example.com',
                defaults={'display_name': full_name},
            )
            user.set_password('password123')
            user.save()
            Staff.objects.get_or_create(
                user=user,
                defaults={
                    'full_name': full_name,
                    'role': role,
                    'hire_date': date(2024, 4, 1),
                }
            )
            users[key] = user

        return users

    def create_casts(self, users):
        """Create cast profiles for the cast logins."""
        self.stdout.write('  Creating cast profiles...')

        casts_data = [
            ('rina', 'Rina', Decimal('3000'), Decimal('10')),
            ('mio', 'Mio', Decimal('2500'), Decimal('8')),
        ]

        casts = []
        for key, stage_name, hourly_rate, back_percentage in casts_data:
            cast, _ = CastProfile.objects.get_or_create(
                staff=users[key].staff_profile,
                defaults={
                    'stage_name': stage_name,
                    'hourly_rate': hourly_rate,
                    'back_percentage': back_percentage,
                    'created_by': users['manager'],
                }
            )
            casts.append(cast)

        return casts

    def create_nomination_types(self):
        """Create the usual nomination menu."""
        self.stdout.write('  Creating nomination types...')

        types_data = [
            ('shimei', 'Shimei', Decimal('3000'), Decimal('50')),
            ('jonai', 'In-house', Decimal('2000'), Decimal('50')),
            ('dohan', 'Dohan', Decimal('5000'), Decimal('60')),
        ]

        for type_name, display_name, price, back_percentage in types_data:
            NominationType.objects.get_or_create(
                type_name=type_name,
                defaults={
                    'display_name': display_name,
                    'price': price,
                    'back_percentage': back_percentage,
                }
            )

    def create_payroll_rule(self, casts):
        """Create a tiered payroll rule and assign it to every cast."""
        self.stdout.write('  Creating payroll rule...')

        if PayrollRule.objects.filter(rule_name='Standard').exists():
            return

        rule = create_rule(
            rule_name='Standard',
            base_hourly_rate=Decimal('2000'),
            base_back_percentage=Decimal('10'),
            effective_from=date(2024, 1, 1),
            tiers=[
                {'min_sales': Decimal('0'), 'max_sales': Decimal('300000'), 'back_percentage': Decimal('10')},
                {'min_sales': Decimal('300000'), 'max_sales': None, 'back_percentage': Decimal('15')},
            ],
        )
        for cast in casts:
            assign_rule(cast_id=cast.id, rule_id=rule.id, assigned_from=date(2024, 4, 1))

    def create_tables(self):
        """Create the floor: six regular tables and two VIP booths."""
        self.stdout.write('  Creating tables...')

        tables = []
        for i in range(1, 7):
            table, _ = Table.objects.get_or_create(
                table_name=f'A{i}',
                defaults={'capacity': 4, 'location': 'main floor'},
            )
            tables.append(table)
        for i in range(1, 3):
            table, _ = Table.objects.get_or_create(
                table_name=f'VIP{i}',
                defaults={'capacity': 8, 'location': 'vip room', 'is_vip': True},
            )
            tables.append(table)

        return tables

    def create_products(self):
        """Create the drinks menu."""
        self.stdout.write('  Creating products...')

        products_data = [
            ('Moet & Chandon Brut', 'champagne', Decimal('30000'), Decimal('9000'), 24),
            ('Dom Perignon', 'champagne', Decimal('80000'), Decimal('28000'), 6),
            ('Hennessy VSOP', 'brandy', Decimal('25000'), Decimal('7000'), 12),
            ('Yamazaki 12', 'whisky', Decimal('40000'), Decimal('15000'), 8),
            ('Kakubin', 'whisky', Decimal('8000'), Decimal('1800'), 40),
            ('Highball', 'cocktail', Decimal('1200'), Decimal('150'), 200),
            ('Oolong Tea', 'soft_drink', Decimal('800'), Decimal('60'), 200),
        ]

        products = {}
        for name, category, price, cost, stock in products_data:
            product, _ = Product.objects.get_or_create(
                name=name,
                defaults={
                    'category': category,
                    'price': price,
                    'cost': cost,
                    'stock_quantity': stock,
                    'low_stock_threshold': 5,
                }
            )
            products[name] = product

        return products

    def create_customers(self, created_by):
        """Create customers."""
        self.stdout.write('  Creating customers...')

        customers_data = [
            ('Yamada Taro', '090-1111-0001', date(1980, 5, 14)),
            ('Suzuki Ichiro', '090-1111-0002', date(1975, 11, 2)),
            ('Takahashi Jun', '090-1111-0003', None),
            ('Watanabe Sho', '090-1111-0004', date(1990, 1, 30)),
            ('Kato Daiki', '090-1111-0005', None),
            ('Yoshida Ren', '090-1111-0006', date(1998, 8, 8)),
        ]

        customers = []
        for name, phone_number, birthday in customers_data:
            customer, _ = Customer.objects.get_or_create(
                phone_number=phone_number,
                defaults={
                    'name': name,
                    'birthday': birthday,
                    'created_by': created_by,
                }
            )
            customers.append(customer)

        return customers

    def create_visits(self, customers, tables):
        """Create three months of completed visits; earlier customers come more often."""
        self.stdout.write('  Creating visits...')

        if Visit.objects.exists():
            return

        now = timezone.now()
        number = 0
        for rank, customer in enumerate(customers):
            visit_count = max(len(customers) * 2 - rank * 3, 1)
            for _ in range(visit_count):
                number += 1
                check_in = now - timedelta(days=random.randint(1 + rank * 10, 90), hours=random.randint(0, 4))
                subtotal = Decimal(random.randrange(20000, 120000, 1000))
                service_charge = subtotal * Decimal('0.20')
                tax_amount = (subtotal + service_charge) * Decimal('0.10')
                Visit.objects.create(
                    session_code=f'V{check_in:%Y%m%d}-{number:04d}',
                    customer=customer,
                    table=random.choice(tables),
                    num_guests=random.randint(1, 4),
                    check_in_at=check_in,
                    check_out_at=check_in + timedelta(hours=2),
                    subtotal=subtotal,
                    service_charge=service_charge,
                    tax_amount=tax_amount,
                    total_amount=subtotal + service_charge + tax_amount,
                    payment_method=random.choice(PaymentMethod.values),
                    payment_status=PaymentStatus.COMPLETED,
                    status=VisitStatus.COMPLETED,
                )

    def create_bottle_keeps(self, customers, products):
        """Create bottle keeps for the two best regulars."""
        self.stdout.write('  Creating bottle keeps...')

        if BottleKeep.objects.exists():
            return

        today = timezone.localdate()
        bottles = [
            (customers[0], products['Yamazaki 12'], 40),
            (customers[0], products['Hennessy VSOP'], 150),
            (customers[1], products['Kakubin'], 175),
        ]
        for customer, product, days_open in bottles:
            create_bottle_keep(
                customer_id=customer.id,
                product_id=product.id,
                opened_date=today - timedelta(days=days_open),
                storage_location='cellar-A',
            )
