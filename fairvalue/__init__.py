'''
Intrinsic value modelling and portfolio tracking engines.

The package has two independent halves built on shared domain types:

- Valuation: a policy-based DCF projector plus peer-multiple relative
  valuation, combined by fairvalue.run into a football field.
- Portfolio: average-cost lot aggregation, manual mark-to-market pricing
  and portfolio totals.

Usage:
  from fairvalue.run import run_valuation
  from fairvalue.portfolio.ledger import Portfolio

  result = run_valuation(inputs)
  summary = Portfolio(name='Core').record_transaction(
      'AAPL', 'BUY', '2024-01-02', quantity=10, price=185.0).summary()
'''
