from customer_directory.models.customer import Customer

__all__ = ["Customer"]
