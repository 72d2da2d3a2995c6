"""Workforce System package.

Feature modules (users, attendance, breaks, leave, payroll, wifi) each carry a
model, a repository interface with its REST implementation, a service and a
thin Flask controller. Persistence lives in the hosted backend; this package
only computes hours, breaks and salaries from the rows it reads.
"""
