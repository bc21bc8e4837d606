"""
Varejo Data Generator

Synthetic retail fixture generator that populates a document store (MongoDB)
and a wide-column store (Cassandra) with equivalent, referentially-consistent
data:
- Cities, addresses, suppliers and products
- Stores, point-of-sale terminals (PDV) and cash registers (caixa)
- Customers, invoices (nota fiscal) and invoice lines
"""

__version__ = "1.0.0"
__author__ = "Varejo DataGen"
