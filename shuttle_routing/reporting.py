"""Console reporting of optimization summaries."""

from typing import Any, Dict, List


def format_summary(summary: Dict[str, Any]) -> List[str]:
    """
    Render a summary (see ``views.build_summary``) as console lines.

    Args:
        summary: Summary dict with ``total_routes`` and per-route ``routes``

    Returns:
        Lines ready to print, in Spanish like the rest of the operator tooling
    """
    rule = "-" * 50
    lines = [rule, f"# Total de Rutas: {summary['total_routes']}", rule]

    for route in summary["routes"]:
        stats = route["stats"]
        lines.extend([
            "",
            f"--------------- RESUMEN RUTA {route['route_number']} ---------------",
            f"Total de Paradas        : {route['total_stops']}",
            f"# de Vehículo           : {route['vehicle_label']}",
            f"Total de Pasajeros      : {route['total_passengers']} / {route['vehicle_capacity']}",
            f"Tiempo total de Viaje   : {stats['total_travel_time_minutes']:.2f} minutos",
            f"Tiempo total de Parada  : {stats['total_stops_time_minutes']:.2f} minutos",
            f"Tiempo total de Ruta    : {stats['total_route_time_minutes']:.2f} minutos / {stats['max_route_time_minutes']}",
            f"Distancia total de Ruta : {stats['total_route_distance_mts'] / 1000} kms",
            "",
        ])

    return lines


def print_summary(summary: Dict[str, Any]) -> None:
    print("\n".join(format_summary(summary)))
