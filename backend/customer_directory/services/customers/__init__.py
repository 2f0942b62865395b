from customer_directory.services.customers.dto import CustomerListIn, CustomerListOut, CustomerOut
from customer_directory.services.customers.service import CustomerService

__all__ = ["CustomerService", "CustomerOut", "CustomerListIn", "CustomerListOut"]
