from ..models import TicketReserve, SoldTicket, Buyer
from ..utils import format_timestamp


class StatsService:
    @staticmethod
    def dashboard_stats():
        """Totals over all contingents. Only paid tickets count as sold."""
        paid_tickets = SoldTicket.query.filter_by(paid=True).all()
        reserves = TicketReserve.query.all()

        total_sold = sum(t.quantity for t in paid_tickets)
        total_available = sum(r.amount for r in reserves)
        potential_revenue = sum((r.amount + r.sold_count) * r.price for r in reserves)
        actual_revenue = sum(
            t.sold_price if t.sold_price is not None else t.reserve.price * t.quantity
            for t in paid_tickets
        )

        return {
            'total_buyers': len({t.buyer_id for t in paid_tickets}),
            'total_available': total_available,
            'total_sold': total_sold,
            'potential_revenue': potential_revenue,
            'actual_revenue': actual_revenue,
        }

    @staticmethod
    def reserves_export():
        headers = ['Typ', 'Menge', 'Preis (€)', 'Liefermethoden', 'Verkaufte Tickets',
                   'Verbleibende Tickets', 'Geändert am', 'Geändert von']
        rows = []
        for reserve in TicketReserve.query.order_by(TicketReserve.id.asc()).all():
            sold = reserve.sold_count
            rows.append([
                reserve.type_name,
                reserve.amount + sold,
                reserve.price,
                ', '.join(m.name for m in reserve.delivery_methods) or '-',
                sold,
                reserve.amount,
                format_timestamp(reserve.updated_at),
                reserve.updated_by or '-',
            ])
        return headers, rows

    @staticmethod
    def tickets_export():
        headers = ['ID', 'Lieferung', 'Code', 'Anzahl', 'Bezahlt', 'Versendet', 'Zeitstempel', 'Aktionen']
        rows = [[
            t.id,
            t.delivery,
            t.code,
            t.quantity,
            'Ja' if t.paid else 'Nein',
            'Ja' if t.sent else 'Nein',
            format_timestamp(t.timestamp),
            'Versendbar' if t.paid and not t.sent else '-',
        ] for t in SoldTicket.query.order_by(SoldTicket.id.asc()).all()]
        return headers, rows

    @staticmethod
    def buyers_export():
        headers = ['ID', 'Name', 'E-Mail', 'Adresse', 'PLZ', 'Stadt', 'Land',
                   'Verifiziert', 'Max. Karten', 'Gruppe']
        rows = [[
            b.id,
            b.name or '',
            b.email,
            b.address or '',
            b.postal or '',
            b.city or '',
            b.country or '',
            'Ja' if b.verified else 'Nein',
            b.max_tickets if b.max_tickets is not None else '',
            b.group.name if b.group else '-',
        ] for b in Buyer.query.order_by(Buyer.id.asc()).all()]
        return headers, rows
