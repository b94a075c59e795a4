from .models import Block, Transaction

__all__ = ['Block', 'Transaction']
